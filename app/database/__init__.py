from app.database.handler import Database

from app.config import DATABASE_USER, DATABASE_PASS, DATABASE_HOST, DATABASE_NAME, DATABASE_URL

# A full DATABASE_URL wins over the MySQL credentials
db_url = DATABASE_URL or Database.build_url(DATABASE_USER, DATABASE_PASS, DATABASE_HOST, DATABASE_NAME)

Base, engine, SessionLocal, db_handler = Database.init_db(db_url)
