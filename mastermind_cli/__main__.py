from mastermind_cli.main import main

main()
