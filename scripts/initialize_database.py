import argparse
import glob
import os

import duckdb
import pandas as pd

# Default paths for the DuckDB database and the Felix table dumps
db_path = 'data/felix.duckdb'
dump_dir = 'docs/felix-dump'


def initialize_database(db_path=db_path, dump_dir=dump_dir, replace=False):
    """
    Initialize the DuckDB database holding the Felix source tables.

    Every ``<table>.csv`` file in ``dump_dir`` (one per MySQL table,
    exported with a header row) becomes a table of the same name.
    Existing tables are left untouched unless ``replace`` is set.
    """
    os.makedirs(os.path.dirname(db_path) or '.', exist_ok=True)

    csv_files = sorted(glob.glob(os.path.join(dump_dir, '*.csv')))
    if not csv_files:
        print(f"No table dumps (.csv) found in '{dump_dir}'.")
        return []

    con = duckdb.connect(database=db_path, read_only=False)
    created = []
    try:
        existing_tables = {row[0] for row in con.execute("SHOW TABLES;").fetchall()}

        for csv_path in csv_files:
            table_name = os.path.splitext(os.path.basename(csv_path))[0]
            if table_name in existing_tables and not replace:
                print(f"Table '{table_name}' already exists. Skipping.")
                continue

            print(f"Reading {csv_path}")
            # Nullable dtypes keep integer ids as integers when a column has NULLs
            df = pd.read_csv(csv_path, dtype_backend='numpy_nullable', keep_default_na=False, na_values=['NULL', '\\N', ''])

            # MySQL column names are already snake_case; only trim stray whitespace
            df.columns = [col.strip() for col in df.columns]

            con.register('df_temp', df)
            con.execute(f'CREATE OR REPLACE TABLE "{table_name}" AS SELECT * FROM df_temp')
            con.unregister('df_temp')
            created.append(table_name)
            print(f"Table '{table_name}' created with {len(df)} rows.")
    finally:
        con.close()
        print("Database connection closed.")
    return created


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Load Felix table dumps into DuckDB.")
    parser.add_argument("--db", default=db_path)
    parser.add_argument("--dumps", default=dump_dir)
    parser.add_argument("--replace", action="store_true")
    args = parser.parse_args()
    initialize_database(args.db, args.dumps, replace=args.replace)
