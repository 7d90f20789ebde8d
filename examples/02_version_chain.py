#!/usr/bin/env python3
"""Example: Version chains and type-level upgrades — compatible-with

Three releases of a contact record.  Nesting adapters reads all three;
``@upgrades_from`` lets any model that embeds the newest type read the
previous one without naming an adapter.

Usage:
    python examples/02_version_chain.py
"""
from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict

from compatible_with import Compatible, conversion, upgrades_from


class ContactV1(BaseModel):
    model_config = ConfigDict(strict=True)

    name: str


class ContactV2(BaseModel):
    model_config = ConfigDict(strict=True)

    first: str
    last: str


@upgrades_from(ContactV2)
class Contact(BaseModel):
    display_name: str
    emails: list[str] = []


@conversion
def contact_v2_from_v1(old: ContactV1) -> ContactV2:
    first, _, last = old.name.partition(" ")
    return ContactV2(first=first, last=last)


@conversion
def contact_from_v2(old: ContactV2) -> Contact:
    return Contact(display_name=f"{old.first} {old.last}".strip())


ContactHistory = Compatible[Compatible[ContactV1, ContactV2], Contact]


class AddressBook(BaseModel):
    owner: Contact
    contacts: list[Contact] = []


def main() -> None:
    logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    # Step 1: Every release of a single record decodes to the newest shape
    for stored in (
        '{"name": "Ada Lovelace"}',
        '{"first": "Alan", "last": "Turing"}',
        '{"display_name": "Grace Hopper", "emails": ["grace@example.org"]}',
    ):
        contact = ContactHistory.decode_json(stored).into_current()
        print(f"{stored} -> {contact.model_dump_json()}")

    # Step 2: Models embedding Contact read the previous release directly
    book = AddressBook.model_validate(
        {
            "owner": {"first": "Edsger", "last": "Dijkstra"},
            "contacts": [{"display_name": "Barbara Liskov"}, {"first": "Donald", "last": "Knuth"}],
        }
    )
    print(book.model_dump_json(indent=2))


if __name__ == "__main__":
    main()
