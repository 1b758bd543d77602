from __future__ import annotations

from app.Cache import CacheManager
from app.Config import config
from app.Localization import LocaleManager
from app.Services.TranslatableService import TranslatableService
from app.Support.ServiceContainer import ServiceContainer, ServiceProvider


class TranslatableServiceProvider(ServiceProvider):
    """
    Registers the translation resolver and the services it is built from.

    Bindings:
        config          the configuration repository
        cache           CacheManager over ``config('cache')``
        locale_manager  LocaleManager built from ``app`` and ``translatable`` config
        translatable    TranslatableService (also behind the Translatable facade)
    """

    def register(self) -> None:
        self.container.singleton('config', lambda container: config())
        self.container.singleton('cache', lambda container: CacheManager(config('cache')))
        self.container.singleton('locale_manager', lambda container: LocaleManager.from_config())
        self.container.singleton('translatable', self._create_translatable_service)

    def boot(self) -> None:
        from app.Console.Artisan import kernel
        from app.Console.Commands.TranslatableCommand import TranslatableMissingCommand

        kernel.register(TranslatableMissingCommand)

    def _create_translatable_service(self, container: ServiceContainer) -> TranslatableService:
        return TranslatableService(
            cache=container.make('cache'),
            locale_manager=container.make('locale_manager'),
        )
