"""jenkins-cli - a command-line client for Jenkins build servers.

This distribution ships the client's shell completion subsystem: the command
metadata tree, the completion engine answering the hidden `__complete`
requests, and the Bash, Zsh, Fish and PowerShell script generators.
"""
