from shellpipe.cli import entrypoint

entrypoint()
