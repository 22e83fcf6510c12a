from acc_director.cli.app import main

main()
