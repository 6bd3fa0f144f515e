from roster_tiers.cli.app import app

app()
