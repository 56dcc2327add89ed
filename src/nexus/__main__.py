from nexus.cli import cli_main

cli_main()
