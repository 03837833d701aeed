"""quickfind: index local files and search them from the terminal."""
