from content_lock.cli.main import main

main()
