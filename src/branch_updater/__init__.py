"""Branch Updater.

Checks a GitHub branch for a new head commit, pulls it into the working
tree, rebuilds the project and (re)launches the application.
"""

__version__ = "0.1.0"
