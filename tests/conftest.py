from datetime import datetime

import pytest

from toms.loader import load_company_info, load_proposal, load_reference_data, load_voucher


NOW = datetime(2024, 3, 5, 14, 7)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def references_record():
    return {
        "agencies": [
            {"id": "ag-1", "name": "Sunrise Tours", "country": "UK", "contactPerson": "Mary Jones",
             "contactEmail": "mary@sunrise.test", "contactPhone": "+44 20 0000", "commissionRate": "5"},
        ],
        "users": [
            {"id": "u-1", "name": "John Doe", "email": "john@toms.test", "role": "sales"},
            {"id": "u-2", "name": "Jane Smith", "email": "jane@toms.test", "role": "sales"},
        ],
        "hotels": [
            {"id": "h-1", "name": "Grand Bosphorus", "destinationId": "d-1", "starRating": 5},
        ],
        "destinations": [
            {"id": "d-1", "name": "Istanbul", "code": "IST", "country": "Turkey"},
            {"id": "d-2", "name": "Cappadocia", "code": "CAP", "country": "Turkey"},
        ],
        "sources": [
            {"id": "web", "name": "Website Enquiry"},
        ],
    }


@pytest.fixture
def references(references_record):
    return load_reference_data(references_record)


@pytest.fixture
def company_record():
    return {
        "name": "Anatolia Travel",
        "phone": "+90 212 000 0000",
        "email": "info@anatolia.test",
        "website": "anatolia.test",
        "currency": "USD",
    }


@pytest.fixture
def company(company_record):
    return load_company_info(company_record)


@pytest.fixture
def proposal_record():
    return {
        "id": "p-1",
        "reference": "PRO-2024-001",
        "source": "web",
        "agencyId": "ag-1",
        "salesPersonId": "u-1",
        "destinationIds": ["d-1", "d-2"],
        "estimatedNights": "3",
        "status": "NEW",
        "createdAt": "2024-01-10T09:30:00Z",
        "hotels": [
            {"id": 1, "destinationId": "d-1", "hotelId": "h-1", "checkin": "2024-01-01",
             "checkout": "2024-01-04", "roomType": "DBL Deluxe", "boardType": "BB",
             "numRooms": 2, "currency": "USD", "pricePerNight": "100"},
        ],
        "transportation": [],
        "flights": [],
        "rentACar": [],
        "additionalServices": [],
        "overallMargin": "10",
        "commission": "5",
        "pdfLanguage": "english",
        "displayCurrency": "USD",
    }


@pytest.fixture
def proposal(proposal_record):
    return load_proposal(proposal_record)


@pytest.fixture
def full_proposal_record(proposal_record):
    record = dict(proposal_record)
    record["transportation"] = [
        {"id": 1, "destinationId": "d-1", "date": "2024-01-01", "description": "Airport transfer",
         "vehicleType": "Minivan", "numDays": 2, "numVehicles": 1, "currency": "USD", "pricePerDay": "50"},
    ]
    record["flights"] = [
        {"id": 1, "date": "2024-01-04", "departure": "IST", "arrival": "NAV", "departureTime": "08:15",
         "flightType": "Domestic", "airline": "TK", "pax": 2, "currency": "USD", "pricePerPax": "80"},
    ]
    record["rentACar"] = [
        {"id": 1, "destinationId": "d-2", "pickupDate": "2024-01-04", "dropoffDate": "2024-01-06",
         "pickupLocation": "NAV Airport", "dropoffLocation": "NAV Airport", "carType": "SUV",
         "numDays": 2, "numCars": 1, "currency": "USD", "pricePerDay": "40"},
    ]
    record["additionalServices"] = [
        {"id": 1, "destinationId": "d-2", "date": "2024-01-05", "description": "Balloon flight",
         "serviceType": "Excursion", "numDays": 1, "numPax": 2, "currency": "USD", "pricePerPax": "150"},
    ]
    return record


@pytest.fixture
def full_proposal(full_proposal_record):
    return load_proposal(full_proposal_record)


@pytest.fixture
def voucher_record():
    return {
        "id": "V-1",
        "proposalId": "p-1",
        "proposalReference": "PRO-2024-001",
        "serviceType": "hotel",
        "serviceId": 1,
        "status": "PENDING_PAYMENT",
        "agencyId": "ag-1",
        "salesPersonId": "u-1",
        "adults": 2,
        "children": 1,
        "totalPax": 3,
        "notes": "Late arrival, please keep the rooms.",
        "guests": [
            {"id": 1, "firstName": "Ali", "lastName": "Yilmaz", "passportNumber": "U123",
             "nationality": "TR", "birthDate": "1990-06-15"},
            {"id": 2, "firstName": "Ayse", "lastName": "Yilmaz", "passportNumber": "U124",
             "nationality": "TR", "birthDate": "2015-01-20"},
        ],
        "serviceData": {
            "id": 1, "destinationId": "d-1", "hotelId": "h-1", "checkin": "2024-01-01",
            "checkout": "2024-01-04", "roomType": "DBL", "boardType": "HB", "numRooms": 2,
            "currency": "USD", "pricePerNight": "100", "totalPrice": 600, "nights": 3,
        },
    }


@pytest.fixture
def voucher(voucher_record):
    return load_voucher(voucher_record)


@pytest.fixture
def flight_voucher(voucher_record):
    record = dict(voucher_record)
    record.update({
        "id": "V-2",
        "serviceType": "flight",
        "guests": [],
        "notes": "",
        "serviceData": {"id": 1, "date": "2024-01-04", "departure": "IST", "arrival": "NAV",
                        "departureTime": "08:15", "airline": "TK", "pax": 2, "pricePerPax": "80",
                        "totalPrice": 160},
    })
    return load_voucher(record)
