"""
Module: report

Purpose:
    Report metadata consumed by the fixed pages: title, file name,
    revision, dates, participants and the ordered signature list.

Key Classes:
    - Signature: One signing party
    - ReportMetadata: Everything the cover/project/signature pages need

Dependencies:
    - dataclasses (std)

Used By:
    - loading.loader: Snapshot parsing
    - layout.pages: Fixed page insertion
    - output.renderer: Header/footer text
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple


@dataclass(frozen=True)
class Signature:
    """
    Signature entry.

    Attributes:
        party: Role of the signer (e.g. "Construtora")
        name: Person name
        image: Embedded signature image payload, if captured
    """
    party: str = ""
    name: str = ""
    image: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Signature":
        image = data.get("image") or data.get("assinatura_imagem")
        return cls(
            party=str(data.get("party") or data.get("parte") or ""),
            name=str(data.get("name") or data.get("nome") or ""),
            image=str(image) if image else None,
        )


@dataclass(frozen=True)
class ReportMetadata:
    """
    Report-level metadata (immutable).

    Attributes:
        title: Report title
        file_name: File name printed in the footer
        revision: Revision label
        inspection_date: Inspection date as stored (ISO string)
        report_date: Report date as stored (ISO string)
        participants: Names of people present
        signatures: Ordered signature entries
        project_name: Project (development) name
        client: Client / administrator name
        unit: Unit identifier
        tenant: Unit occupant
        consultant: Responsible consultant
        contract_text: Contract reference text
        scope_text: Consulting scope text
    """
    title: str = ""
    file_name: str = ""
    revision: str = ""
    inspection_date: Optional[str] = None
    report_date: Optional[str] = None
    participants: Tuple[str, ...] = ()
    signatures: Tuple[Signature, ...] = ()
    project_name: str = ""
    client: str = ""
    unit: str = ""
    tenant: str = ""
    consultant: str = ""
    contract_text: str = ""
    scope_text: str = ""

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ReportMetadata":
        if not isinstance(data, Mapping):
            return cls()
        participants = data.get("participants") or ()
        if isinstance(participants, str):
            participants = [p.strip() for p in participants.split(",") if p.strip()]
        signatures = data.get("signatures") or ()
        return cls(
            title=str(data.get("title") or ""),
            file_name=str(data.get("file_name") or ""),
            revision=str(data.get("revision") or ""),
            inspection_date=data.get("inspection_date"),
            report_date=data.get("report_date"),
            participants=tuple(str(p) for p in participants),
            signatures=tuple(
                Signature.from_dict(s) for s in signatures if isinstance(s, Mapping)
            ),
            project_name=str(data.get("project_name") or ""),
            client=str(data.get("client") or ""),
            unit=str(data.get("unit") or ""),
            tenant=str(data.get("tenant") or ""),
            consultant=str(data.get("consultant") or ""),
            contract_text=str(data.get("contract_text") or ""),
            scope_text=str(data.get("scope_text") or ""),
        )

    @property
    def has_signatures(self) -> bool:
        return bool(self.signatures)
