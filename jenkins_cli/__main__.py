"""Allow running with `python -m jenkins_cli`."""

from jenkins_cli.command import main

main()
