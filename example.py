from datetime import date

from cnb_fixing import CnbFixing

print(CnbFixing.__version__)  # 0.1.0

# Default usage: local SQLite file
fx = CnbFixing()

# Seed today's fixing, as a hosting process does once at start-up
summary = fx.start()
print(summary.as_dict())
# => {'date': '2024-01-19', 'ok': True, 'upserted': 31, 'diagnostics': [], ...}

# Backfill a window, one day after another
for day in fx.sync_range(date(2024, 1, 1), date(2024, 1, 7)):
    print(day.rate_date, day.upserted, day.fetch_error)

# Min / max / average per currency
report = fx.report("2024-01-01", "2024-01-07", "USD,EUR")
print({code: stats.as_dict() for code, stats in report.items()})
# => {'EUR': {'min': 24.6, 'max': 24.72, 'avg': 24.66, 'count': 5}, 'USD': {...}}

# Same report in list form
print(fx.report_rows(date(2024, 1, 1), date(2024, 1, 7), ["USD"]))
# => [{'currency': 'USD', 'minRate': 22.3, 'maxRate': 22.6, 'avgRate': 22.45}]

print(len(fx.all_records()))
fx.close()
