from spatialgen.cli import run

run()
