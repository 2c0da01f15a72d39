from pagefinder.cli import app

app(prog_name="pagefinder")
