from memory_journal.db.sql import common as common_sql_statements
from memory_journal.db.sql import main_db as main_db_sql_statements
