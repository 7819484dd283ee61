# invoicing/domain/models/company.py
"""Static letterhead, deductor and bank details printed on every document."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class BankDetails:
    bank_name: str
    account_number: str
    ifsc_code: str
    branch: str


@dataclass(frozen=True)
class CompanyProfile:
    name: str
    address: str
    city: str
    state: str
    state_code: str
    pincode: str
    country: str
    phone: str
    email: str
    website: str
    gstin: str
    pan: str
    cin: str
    tan: str
    bank: BankDetails

    @property
    def address_lines(self) -> list[str]:
        return [
            f"{self.address}, {self.city}",
            f"{self.state} - {self.pincode}",
            f"GSTIN: {self.gstin} | PAN: {self.pan}",
            f"Email: {self.email} | {self.website}",
        ]


COMPANY = CompanyProfile(
    name="Endeavor Academy Pvt Ltd",
    address="123 Business Center, Andheri East",
    city="Mumbai",
    state="Maharashtra",
    state_code="27",
    pincode="400069",
    country="India",
    phone="+91 22 1234 5678",
    email="accounts@endeavoracademy.us",
    website="https://www.endeavoracademy.us",
    gstin="27AABCE1234A1Z5",
    pan="AABCE1234A",
    cin="U80904MH2015PTC123456",
    tan="MUM12345A",
    bank=BankDetails(
        bank_name="HDFC Bank Ltd.",
        account_number="12345678901234",
        ifsc_code="HDFC0000123",
        branch="Andheri East, Mumbai",
    ),
)
