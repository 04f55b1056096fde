import logging
import sys
from pathlib import Path

from grocery_shopper.db import SessionLocal, init_db
from grocery_shopper.seed import import_seed, load_seed


def main():
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    init_db()
    if len(sys.argv) > 1:
        p = Path(sys.argv[1])
    else:
        p = Path(__file__).resolve().parents[1] / 'data' / 'seed.json'
    if not p.exists():
        print(f'{p} not found')
        return
    db = SessionLocal()
    try:
        added = import_seed(db, load_seed(p))
    finally:
        db.close()
    print(f'Imported {added} records')


if __name__ == '__main__':
    main()
