from stepscript.cli import app

app(prog_name="stepscript")
