from spike_studio.cli import main

main()
