from rent_reclaim.reclaimer.cli import main

main()
