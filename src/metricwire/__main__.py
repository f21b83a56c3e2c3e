from metricwire.cli import main

main()
