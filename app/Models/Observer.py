from __future__ import annotations

import logging
from typing import Any, Dict, List, Type

from sqlalchemy import event
from sqlalchemy.orm import Session

_FLUSHED_KEY = '_observer_flushed'


class ModelObserver:
    """Laravel-style Model Observer base class.

    Hooks are fired from session flush events; return values are ignored.
    """

    def creating(self, model: Any) -> None:
        pass

    def created(self, model: Any) -> None:
        pass

    def updating(self, model: Any) -> None:
        pass

    def updated(self, model: Any) -> None:
        pass

    def saving(self, model: Any) -> None:
        pass

    def saved(self, model: Any) -> None:
        pass

    def deleting(self, model: Any) -> None:
        pass

    def deleted(self, model: Any) -> None:
        pass

    def restoring(self, model: Any) -> None:
        pass

    def restored(self, model: Any) -> None:
        pass

    def force_deleting(self, model: Any) -> None:
        pass

    def force_deleted(self, model: Any) -> None:
        pass


class ObserverRegistry:
    """Registry for model observers.

    Listens on the ``Session`` class, so every session built by the
    application (``SessionLocal`` or a bare ``Session``) reports to it:

    * ``before_flush``: creating/updating/saving for new and dirty models,
      deleting for models marked for deletion
    * ``after_flush``: remembers what the flush wrote
    * ``after_flush_postexec``: created/updated/saved and deleted; objects
      added here are written by the next flush or by commit
    """

    def __init__(self) -> None:
        self.logger = logging.getLogger(self.__class__.__name__)
        self._observers: Dict[Type[Any], List[ModelObserver]] = {}
        self._global_observers: List[ModelObserver] = []
        self._listening = False

    def observe(self, model_class: Type[Any], observer: ModelObserver) -> None:
        """Register an observer for a model class and its subclasses."""
        observers = self._observers.setdefault(model_class, [])
        if observer not in observers:
            observers.append(observer)
        self._register_sqlalchemy_events()

    def observe_global(self, observer: ModelObserver) -> None:
        """Register a global observer for all models."""
        if observer not in self._global_observers:
            self._global_observers.append(observer)
        self._register_sqlalchemy_events()

    def forget(self, model_class: Type[Any]) -> None:
        self._observers.pop(model_class, None)

    def observers_for(self, model: Any) -> List[ModelObserver]:
        found: List[ModelObserver] = []
        for model_class, observers in self._observers.items():
            if isinstance(model, model_class):
                found.extend(o for o in observers if o not in found)
        found.extend(o for o in self._global_observers if o not in found)
        return found

    def is_observed(self, model: Any) -> bool:
        return bool(self.observers_for(model))

    def _register_sqlalchemy_events(self) -> None:
        if self._listening:
            return
        event.listen(Session, 'before_flush', self._before_flush)
        event.listen(Session, 'after_flush', self._after_flush)
        event.listen(Session, 'after_flush_postexec', self._after_flush_postexec)
        self._listening = True

    def _before_flush(self, session: Session, flush_context: Any, instances: Any) -> None:
        for model in list(session.new):
            self.fire('creating', model)
            self.fire('saving', model)

        for model in list(session.dirty):
            self.fire('updating', model)
            self.fire('saving', model)

        for model in list(session.deleted):
            self.fire('deleting', model)

    def _after_flush(self, session: Session, flush_context: Any) -> None:
        deleted = [model for model in session.deleted if self.is_observed(model)]
        created = [model for model in session.new if self.is_observed(model)]
        updated = [
            model for model in session.dirty
            if model not in session.deleted and self.is_observed(model)
        ]
        session.info[_FLUSHED_KEY] = (created, updated, deleted)

    def _after_flush_postexec(self, session: Session, flush_context: Any) -> None:
        flushed = session.info.pop(_FLUSHED_KEY, None)
        if flushed is None:
            return
        created, updated, deleted = flushed

        for model in created:
            self.fire('created', model)
            self.fire('saved', model)

        for model in updated:
            self.fire('updated', model)
            self.fire('saved', model)

        for model in deleted:
            self.fire('deleted', model)

    def fire(self, event_name: str, model: Any) -> None:
        """Fire an observer event for a model."""
        for observer in self.observers_for(model):
            method = getattr(observer, event_name, None)
            if method and callable(method):
                method(model)


# Global observer registry
observer_registry = ObserverRegistry()


def observe(model_class: Type[Any], observer: ModelObserver) -> None:
    """Register a model observer."""
    observer_registry.observe(model_class, observer)
