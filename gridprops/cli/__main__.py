from gridprops.cli.main import main

main()
