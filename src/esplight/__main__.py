from esplight.cli import app

app(prog_name="esplight")
