from stampdesk.main import main

main()
