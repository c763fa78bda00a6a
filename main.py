"""
Local entry point for the Blueprint API
"""

from blueprint.main import app, run

if __name__ == "__main__":
    run()
