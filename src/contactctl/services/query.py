"""QueryService — read-only views over the contact store."""

from __future__ import annotations

from contactctl.domain.duplicates import detect_duplicates
from contactctl.domain.matching import matches_term
from contactctl.services.base import BaseService
from contactctl.services.contracts import ContactListData, DuplicatesData, dump_validated
from contactctl.services.result import ServiceResult
from contactctl.services.telemetry import trace_span, traced


class QueryService(BaseService):
    """List, fetch, search, and scan for duplicates. Never mutates."""

    @traced
    def list_contacts(self) -> ServiceResult:
        """All contacts in store order."""
        items = [c.to_wire() for c in self._book.store.list()]
        return ServiceResult(
            ok=True,
            op="list",
            data=dump_validated(ContactListData, {"count": len(items), "items": items}),
        )

    @traced
    def get(self, contact_id: str) -> ServiceResult:
        contact = self._book.store.get(contact_id)
        if contact is None:
            return ServiceResult.failure(
                "show",
                "NOT_FOUND",
                f"No contact found with ID: {contact_id}",
                id=contact_id,
            )
        return ServiceResult(ok=True, op="show", data={"contact": contact.to_wire()})

    @traced
    def search(self, term: str) -> ServiceResult:
        """Contacts whose name, email, or phone contains *term*."""
        items = [c.to_wire() for c in self._book.store.list() if matches_term(c, term)]
        return ServiceResult(
            ok=True,
            op="search",
            data=dump_validated(
                ContactListData,
                {"count": len(items), "items": items, "term": term},
            ),
        )

    @traced
    def duplicates(self) -> ServiceResult:
        """Scan the whole store for suspected duplicates (O(n²))."""
        contacts = self._book.store.list()
        with trace_span("detect_duplicates") as span:
            groups = detect_duplicates(contacts)
            if span is not None:
                span.annotate("contacts", len(contacts))
                span.annotate("groups", len(groups))

        payload = {
            "count": len(groups),
            "groups": [
                {
                    "index": index,
                    "ids": group.ids,
                    "items": [c.to_wire() for c in group.members],
                    "reasons": group.reasons,
                }
                for index, group in enumerate(groups, start=1)
            ],
        }
        return ServiceResult(
            ok=True,
            op="duplicates",
            data=dump_validated(DuplicatesData, payload),
        )
