# ContainerWatch - Scope resolver: which host/container/image an event targets
from __future__ import annotations

from containerwatch.models import RawEvent
from containerwatch.tables import is_image_event

logger = __import__("logging").getLogger("containerwatch.scope")

DIGEST_PREFIX = "sha256:"
SHORT_ID_LEN = 12

# Image actions whose id still names a container-shaped entity.
_CONTAINER_ID_IMAGE_ACTIONS = ("untag", "delete")


def normalize_actor_id(actor_id: str) -> str:
    if len(actor_id) > len(DIGEST_PREFIX) and actor_id.startswith(DIGEST_PREFIX):
        return actor_id[len(DIGEST_PREFIX):]
    return actor_id


def _entity_clause(action: str, actor_id: str, image: str) -> str | None:
    if image == actor_id:
        return f"container.image={image}"
    if is_image_event(action):
        if action in _CONTAINER_ID_IMAGE_ACTIONS:
            return f"container.id={actor_id[:SHORT_ID_LEN]}"
        if image:
            return f"container.image={image}"
        if actor_id:
            return f"container.image={actor_id}"
        return None
    return f"container.id={actor_id[:SHORT_ID_LEN]}"


def resolve_scope(event: RawEvent, machine_id: str = "") -> str:
    """Build the scope expression for ``event``.

    The host clause comes first when a machine id is configured; the entity
    clause is only added for events carrying an actor id. An image event whose
    entity cannot be determined is reported and left with the host clause only.
    """
    clauses: list[str] = []
    if machine_id:
        clauses.append(f"host.mac={machine_id}")
    actor_id = normalize_actor_id(event.actor_id)
    if actor_id:
        entity = _entity_clause(event.action, actor_id, event.image)
        if entity is None:
            logger.error("Cannot determine container image for Docker %s event (empty).", event.action)
        else:
            clauses.append(entity)
    return " and ".join(clauses)
