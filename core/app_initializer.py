# core/app_initializer.py
import os
from dataclasses import dataclass

from core.store import AppStore
from infrastructure.configuration import ConfigurationService
from infrastructure.database import Database
from infrastructure.export_service import ExportService, PdfLayout
from infrastructure.logging_service import enable_logging, get_module_logger
from infrastructure.persistence import PersistenceService
from infrastructure.pricing_service import PricingService
from infrastructure.quote_numbering_service import QuoteNumberingService


@dataclass
class AppContext:
    config: ConfigurationService
    db: Database
    store: AppStore
    pricing: PricingService
    exporter: ExportService


def initialize_app(config: ConfigurationService = None, db_path: str = None,
                   layout: PdfLayout = None, logging_enabled: bool = True) -> AppContext:
    """Build the shared services (logging, storage, state, pricing, export)."""
    if logging_enabled:
        enable_logging()
    logger = get_module_logger("AppInitializer", "app.log")

    config = config or ConfigurationService.get_instance()
    db_path = db_path or config.get_database_path()
    parent = os.path.dirname(db_path)
    if parent:
        os.makedirs(parent, exist_ok=True)

    db = Database(db_path)
    persistence = PersistenceService(db, config.get_storage_namespace())
    store = AppStore.load(persistence, numbering=QuoteNumberingService(db))
    pricing = PricingService.from_configuration(config)

    logger.info(f"Started with {db_path}: {len(store.clients)} clients, {len(store.documents)} documents, "
                f"AI {'on (' + config.get_ai_provider() + ')' if pricing.provider_client else 'off'}")
    return AppContext(config=config, db=db, store=store, pricing=pricing, exporter=ExportService(layout))
