import logging

from django.db import models, transaction

logger = logging.getLogger(__name__)


class EntityNotFound(Exception):
    def __init__(self, model, pk):
        self.model = model
        self.pk = pk
        super().__init__(f"{model.__name__} #{pk} not found")


def get_entity(model: type[models.Model], pk):
    obj = model._default_manager.filter(pk=pk).first()
    if obj is None:
        raise EntityNotFound(model, pk)
    return obj


@transaction.atomic
def create_entity(model: type[models.Model], **fields):
    obj = model(**fields)
    obj.full_clean()
    obj.save()
    logger.info("Created %s #%s", model.__name__, obj.pk)
    return obj


@transaction.atomic
def update_entity(model: type[models.Model], pk, **changes):
    obj = get_entity(model, pk)
    for name, value in changes.items():
        setattr(obj, name, value)
    obj.full_clean()
    obj.save()
    logger.info("Updated %s #%s (%s)", model.__name__, pk, ", ".join(sorted(changes)))
    return obj


@transaction.atomic
def delete_entity(model: type[models.Model], pk) -> bool:
    """Delete by primary key. Deleting a missing row is not an error."""
    deleted, _ = model._default_manager.filter(pk=pk).delete()
    if deleted:
        logger.info("Deleted %s #%s", model.__name__, pk)
    return bool(deleted)
