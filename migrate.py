import argparse
import logging

from portfolio_api.database.database import SessionLocal, create_tables
from portfolio_api.utils.seed_data import seed_portfolio

logger = logging.getLogger("migrate")


def migrate(seed: bool = False):
    logger.info("Création des tables...")
    create_tables()
    if seed:
        db = SessionLocal()
        try:
            added = seed_portfolio(db)
        finally:
            db.close()
        logger.info("Seeded: %s", ", ".join(f"{k}={v}" for k, v in added.items()))
    logger.info("Migration terminée avec succès!")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create the database tables.")
    parser.add_argument("--seed", action="store_true", help="load the default portfolio content into empty tables")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    migrate(seed=args.seed)
