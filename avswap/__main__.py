from avswap.cli import app

app()
