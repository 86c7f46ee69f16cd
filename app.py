"""Run the records API: `python app.py` (port from API_PORT, default 3001)."""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent / "src" / "registros_system"))

from registros_system import create_app

app = create_app()

if __name__ == "__main__":
    app.run(host=app.config["API_HOST"], port=app.config["API_PORT"], debug=app.config["DEBUG"])
