from scheduler_provider.cli import main

main()
