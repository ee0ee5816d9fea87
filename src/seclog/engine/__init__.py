"""Security log engine.

Components:
    parser      LogParser: raw line -> LogRecord
    active      ActiveLogReader: paginated view over unarchived daily files
    compactor   ArchiveCompactor: moves past months into monthly archives
    reader      ArchiveReader: lists archives, paginates one archive
    service     SecurityLogService: operation surface for API and CLI
    writer      Daily file log handler (producer side)
    scheduler   RetentionScheduler: daily archival trigger

Import directly from submodules:
    from seclog.engine.service import SecurityLogService
"""

__all__: list[str] = []
