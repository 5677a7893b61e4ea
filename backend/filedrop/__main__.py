"""Allow ``python -m filedrop`` to start the server."""
from filedrop.main import run

run()
