"""
LabPulse: dental lab metrics aggregation and rollup engine.

Backend for a multi-office lab dashboard: offices enter weekly production
counts and monthly financial and staffing figures, and the engine turns
them into monthly rollups, office summaries, rankings and compliance
reports over arbitrary month windows.

To point at another database:
    Pass a SQLAlchemy URL to store.SqlStore, or set LABPULSE_DATABASE_URL.
    Any object implementing store.MetricsStore can stand in for SqlStore.

To connect to a front end:
    Call dashboard.get_dashboard_summary(store, window) for office cards,
    rankings.get_office_rankings(store, metric, window) for ranking tables
    and compliance.get_compliance_report(store) for the compliance page.

To add new ranking metrics:
    Add an entry to config.METRIC_REGISTRY naming its source table, column,
    single/multi-month aggregation and unit.
"""
