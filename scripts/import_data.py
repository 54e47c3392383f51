import sys
from pathlib import Path

from cuisine_api.config import get_settings
from cuisine_api.db import Database
from cuisine_api.seed import import_recipes, load_recipes


def main():
    settings = get_settings()
    database = Database(settings.database_url)
    database.init_db()
    if len(sys.argv) > 1:
        p = Path(sys.argv[1])
    else:
        p = Path(__file__).resolve().parents[1] / 'data' / 'recipes.json'
    if not p.exists():
        print(f'{p} not found')
        return
    db = database.SessionLocal()
    try:
        added = import_recipes(db, load_recipes(p))
    finally:
        db.close()
        database.close()
    print(f'Imported {added} recipes')


if __name__ == '__main__':
    main()
