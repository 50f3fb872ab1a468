from clipfix.cli.app import main

main()
