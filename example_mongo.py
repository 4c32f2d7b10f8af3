from datetime import date

from cnb_fixing import CnbFixing

# MongoDB usage; documents land in the ``currencies`` collection
fx = CnbFixing(db_config="mongodb://127.0.0.1:27017/currency-sync-app")

success, error = fx.connection()  # => to check the connectivity
if not success:
    print(error)
    exit(1)

with fx:
    fx.start()
    fx.sync_range(date(2024, 1, 1), date(2024, 1, 31))
    print(fx.report_rows("2024-01-01", "2024-01-31", "USD,EUR,GBP"))
