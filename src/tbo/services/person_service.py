from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

from tbo.domain.errors import NotFoundError, ValidationError
from tbo.domain.models import Person
from tbo.repositories.memory_store import MemoryStore

log = logging.getLogger("tbo.ledger")


class PersonService:
    def __init__(self, store: MemoryStore):
        self.store = store

    def list_persons(self) -> list[Person]:
        return self.store.get_persons()

    def find_person(self, person_id: int) -> Optional[Person]:
        for p in self.store.get_persons():
            if p.id == int(person_id):
                return p
        return None

    def get_person(self, person_id: int) -> Person:
        person = self.find_person(person_id)
        if not person:
            raise NotFoundError("Person not found.")
        return person

    def find_by_name(self, name: str) -> Optional[Person]:
        for p in self.store.get_persons():
            if p.name == name:
                return p
        return None

    def add_person(self, name: str) -> Person:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Person name is required.")
        person = Person(id=self.store.next_stamp(), name=name)
        self.store.set_persons([*self.store.get_persons(), person])
        log.info("person_added person_id=%s", person.id)
        return person

    def rename_person(self, person_id: int, name: str) -> Person:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Person name is required.")
        current = self.get_person(person_id)
        updated = replace(current, name=name)
        self.store.set_persons([updated if p.id == current.id else p for p in self.store.get_persons()])
        return updated

    def delete_person(self, person_id: int) -> None:
        """Remove the person only. Transactions and invoices that reference it are kept as-is."""
        person = self.get_person(person_id)
        self.store.set_persons([p for p in self.store.get_persons() if p.id != person.id])

        dangling_tx = sum(1 for tx in self.store.get_transactions() if tx.touches(person.id))
        dangling_inv = sum(1 for inv in self.store.get_invoices() if inv.person_id == person.id)
        if dangling_tx or dangling_inv:
            log.warning(
                "person_deleted_with_references person_id=%s transactions=%s invoices=%s",
                person.id, dangling_tx, dangling_inv,
            )
        else:
            log.info("person_deleted person_id=%s", person.id)
