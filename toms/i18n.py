"""Static label tables for printed documents.

Lookup never fails: the requested language table is tried first, then
English, then the key itself is returned.
"""
from enum import Enum
from types import MappingProxyType
from typing import Callable, Optional


class Language(Enum):
    ENGLISH = "english"
    ARABIC = "arabic"
    TURKISH = "turkish"


DEFAULT_LANGUAGE = Language.ENGLISH

_ALIASES = {
    "en": Language.ENGLISH,
    "ar": Language.ARABIC,
    "tr": Language.TURKISH,
}

_ENGLISH = {
    "proposal": "TRAVEL PROPOSAL",
    "voucher": "SERVICE VOUCHER",
    "reference": "Reference",
    "date": "Date",
    "agency": "Agency",
    "salesPerson": "Sales Person",
    "destinations": "Destinations",
    "source": "Source",
    "contact": "Contact",
    "email": "Email",
    "phone": "Phone",
    "website": "Website",
    "hotels": "Hotels",
    "transportation": "Transportation",
    "flights": "Flights",
    "rentACar": "Rent-A-Car",
    "additionalServices": "Additional Services",
    "hotel": "Hotel",
    "destination": "Destination",
    "checkin": "Check-in",
    "checkout": "Check-out",
    "nights": "Nights",
    "rooms": "Rooms",
    "roomType": "Room Type",
    "mealPlan": "Meal Plan",
    "pricePerNight": "Price/Night",
    "total": "Total",
    "vehicleType": "Vehicle Type",
    "numVehicles": "Vehicles",
    "days": "Days",
    "pricePerDay": "Price/Day",
    "flightType": "Flight Type",
    "airline": "Airline",
    "route": "Route",
    "flightDate": "Date",
    "time": "Time",
    "passengers": "Passengers",
    "pricePerPax": "Price/Pax",
    "carType": "Car Type",
    "cars": "Cars",
    "pickupDate": "Pickup Date",
    "dropoffDate": "Drop-off Date",
    "pickupLocation": "Pickup Location",
    "dropoffLocation": "Drop-off Location",
    "serviceType": "Service Type",
    "description": "Description",
    "subtotal": "Subtotal",
    "margin": "Margin",
    "commission": "Commission",
    "grandTotal": "Grand Total",
    "guests": "Guests",
    "name": "Name",
    "age": "Age",
    "passport": "Passport",
    "nationality": "Nationality",
    "birthDate": "Date of Birth",
    "adults": "Adults",
    "children": "Children",
    "totalPax": "Total Passengers",
    "notes": "Notes",
    "serviceDetails": "Service Details",
    "status": "Status",
    "new": "New",
    "confirmed": "Confirmed",
    "cancelled": "Cancelled",
    "pending_payment": "Pending Payment",
    "paid": "Paid",
    "completed": "Completed",
    "termsConditions": "Terms & Conditions",
    "footer": "Thank you for choosing our services",
    "page": "Page",
    "unknown": "N/A",
    "travelCompany": "TRAVEL COMPANY",
    "voucherNo": "Voucher No",
    "operator": "Operator",
    "noGuests": "No guests listed",
    "agencyInformation": "AGENCY INFORMATION",
    "guestList": "GUEST LIST",
    "importantNotes": "IMPORTANT NOTES",
    "accommodation": "ACCOMMODATION",
    "vehicle": "VEHICLE",
    "flight": "FLIGHT",
    "car": "CAR",
    "service": "SERVICE",
    "ref": "Ref",
    "form.hotel": "HOTEL RESERVATION FORM",
    "form.transportation": "TRANSFER SERVICE FORM",
    "form.flight": "FLIGHT BOOKING FORM",
    "form.rentacar": "CAR RENTAL FORM",
    "form.additional": "SERVICE RESERVATION FORM",
    "disclaimer": "All additional services are for guest's own account",
    "bulk.noneSelected": "Please select at least one voucher",
    "bulk.cannotMarkPaid": "Cannot mark as paid:",
    "bulk.cannotComplete": "Cannot mark as completed:",
    "bulk.cannotCancel": "Cannot cancel:",
    "bulk.markedPaid": "Marked as paid:",
    "bulk.completed": "Marked as completed:",
    "bulk.cancelled": "Cancelled:",
    "voucherSingular": "voucher",
    "voucherPlural": "vouchers",
}

_ARABIC = {
    "proposal": "عرض سفر",
    "voucher": "قسيمة خدمة",
    "reference": "المرجع",
    "date": "التاريخ",
    "agency": "الوكالة",
    "salesPerson": "مندوب المبيعات",
    "destinations": "الوجهات",
    "source": "المصدر",
    "contact": "جهة الاتصال",
    "email": "البريد الإلكتروني",
    "phone": "الهاتف",
    "website": "الموقع الإلكتروني",
    "hotels": "الفنادق",
    "transportation": "النقل",
    "flights": "الرحلات الجوية",
    "rentACar": "استئجار سيارة",
    "additionalServices": "خدمات إضافية",
    "hotel": "الفندق",
    "destination": "الوجهة",
    "checkin": "تسجيل الوصول",
    "checkout": "تسجيل المغادرة",
    "nights": "الليالي",
    "rooms": "الغرف",
    "roomType": "نوع الغرفة",
    "mealPlan": "نظام الوجبات",
    "pricePerNight": "السعر/الليلة",
    "total": "المجموع",
    "vehicleType": "نوع المركبة",
    "numVehicles": "المركبات",
    "days": "الأيام",
    "pricePerDay": "السعر/اليوم",
    "flightType": "نوع الرحلة",
    "airline": "شركة الطيران",
    "route": "المسار",
    "flightDate": "التاريخ",
    "time": "الوقت",
    "passengers": "الركاب",
    "pricePerPax": "السعر/الراكب",
    "carType": "نوع السيارة",
    "cars": "السيارات",
    "pickupDate": "تاريخ الاستلام",
    "dropoffDate": "تاريخ التسليم",
    "pickupLocation": "موقع الاستلام",
    "dropoffLocation": "موقع التسليم",
    "serviceType": "نوع الخدمة",
    "description": "الوصف",
    "subtotal": "المجموع الفرعي",
    "margin": "الهامش",
    "commission": "العمولة",
    "grandTotal": "المجموع الإجمالي",
    "guests": "الضيوف",
    "name": "الاسم",
    "age": "العمر",
    "passport": "جواز السفر",
    "nationality": "الجنسية",
    "birthDate": "تاريخ الميلاد",
    "adults": "البالغون",
    "children": "الأطفال",
    "totalPax": "إجمالي الركاب",
    "notes": "الملاحظات",
    "serviceDetails": "تفاصيل الخدمة",
    "status": "الحالة",
    "new": "جديد",
    "confirmed": "مؤكد",
    "cancelled": "ملغي",
    "pending_payment": "بانتظار الدفع",
    "paid": "مدفوع",
    "completed": "مكتمل",
    "termsConditions": "الشروط والأحكام",
    "footer": "شكرا لاختياركم خدماتنا",
    "page": "صفحة",
    "unknown": "غير متوفر",
    "travelCompany": "شركة سفر",
    "voucherNo": "رقم القسيمة",
    "operator": "المشغل",
    "noGuests": "لا يوجد ضيوف مسجلون",
    "agencyInformation": "معلومات الوكالة",
    "guestList": "قائمة الضيوف",
    "importantNotes": "ملاحظات مهمة",
    "accommodation": "الإقامة",
    "vehicle": "المركبة",
    "flight": "الرحلة",
    "car": "السيارة",
    "service": "الخدمة",
    "ref": "المرجع",
    "form.hotel": "نموذج حجز فندق",
    "form.transportation": "نموذج خدمة النقل",
    "form.flight": "نموذج حجز رحلة طيران",
    "form.rentacar": "نموذج استئجار سيارة",
    "form.additional": "نموذج حجز خدمة",
    "disclaimer": "جميع الخدمات الإضافية على حساب الضيف",
    "bulk.noneSelected": "يرجى اختيار قسيمة واحدة على الأقل",
    "bulk.cannotMarkPaid": "لا يمكن تحديدها كمدفوعة:",
    "bulk.cannotComplete": "لا يمكن تحديدها كمكتملة:",
    "bulk.cannotCancel": "لا يمكن إلغاؤها:",
    "bulk.markedPaid": "تم تحديدها كمدفوعة:",
    "bulk.completed": "تم تحديدها كمكتملة:",
    "bulk.cancelled": "تم إلغاؤها:",
    "voucherSingular": "قسيمة",
    "voucherPlural": "قسائم",
}

_TURKISH = {
    "proposal": "SEYAHAT TEKLİFİ",
    "voucher": "HİZMET KUPONU",
    "reference": "Referans",
    "date": "Tarih",
    "agency": "Acenta",
    "salesPerson": "Satış Temsilcisi",
    "destinations": "Destinasyonlar",
    "source": "Kaynak",
    "contact": "İletişim",
    "email": "E-posta",
    "phone": "Telefon",
    "website": "Web Sitesi",
    "hotels": "Oteller",
    "transportation": "Ulaşım",
    "flights": "Uçuşlar",
    "rentACar": "Araç Kiralama",
    "additionalServices": "Ek Hizmetler",
    "hotel": "Otel",
    "destination": "Destinasyon",
    "checkin": "Giriş",
    "checkout": "Çıkış",
    "nights": "Gece",
    "rooms": "Odalar",
    "roomType": "Oda Tipi",
    "mealPlan": "Pansiyon",
    "pricePerNight": "Gece Fiyatı",
    "total": "Toplam",
    "vehicleType": "Araç Tipi",
    "numVehicles": "Araçlar",
    "days": "Günler",
    "pricePerDay": "Günlük Fiyat",
    "flightType": "Uçuş Tipi",
    "airline": "Havayolu",
    "route": "Güzergah",
    "flightDate": "Tarih",
    "time": "Saat",
    "passengers": "Yolcular",
    "pricePerPax": "Kişi Başı Fiyat",
    "carType": "Araç Tipi",
    "cars": "Araçlar",
    "pickupDate": "Alış Tarihi",
    "dropoffDate": "Bırakış Tarihi",
    "pickupLocation": "Alış Yeri",
    "dropoffLocation": "Bırakış Yeri",
    "serviceType": "Hizmet Tipi",
    "description": "Açıklama",
    "subtotal": "Ara Toplam",
    "margin": "Kar Marjı",
    "commission": "Komisyon",
    "grandTotal": "Genel Toplam",
    "guests": "Misafirler",
    "name": "İsim",
    "age": "Yaş",
    "passport": "Pasaport",
    "nationality": "Uyruk",
    "birthDate": "Doğum Tarihi",
    "adults": "Yetişkin",
    "children": "Çocuk",
    "totalPax": "Toplam Yolcu",
    "notes": "Notlar",
    "serviceDetails": "Hizmet Detayları",
    "status": "Durum",
    "new": "Yeni",
    "confirmed": "Onaylandı",
    "cancelled": "İptal Edildi",
    "pending_payment": "Ödeme Bekliyor",
    "paid": "Ödendi",
    "completed": "Tamamlandı",
    "termsConditions": "Şartlar ve Koşullar",
    "footer": "Hizmetlerimizi tercih ettiğiniz için teşekkür ederiz",
    "page": "Sayfa",
    "unknown": "Yok",
    "travelCompany": "SEYAHAT ŞİRKETİ",
    "voucherNo": "Kupon No",
    "operator": "Operatör",
    "noGuests": "Misafir listesi boş",
    "agencyInformation": "ACENTA BİLGİLERİ",
    "guestList": "MİSAFİR LİSTESİ",
    "importantNotes": "ÖNEMLİ NOTLAR",
    "accommodation": "KONAKLAMA",
    "vehicle": "ARAÇ",
    "flight": "UÇUŞ",
    "car": "OTOMOBİL",
    "service": "HİZMET",
    "ref": "Ref",
    "form.hotel": "OTEL REZERVASYON FORMU",
    "form.transportation": "TRANSFER HİZMET FORMU",
    "form.flight": "UÇUŞ REZERVASYON FORMU",
    "form.rentacar": "ARAÇ KİRALAMA FORMU",
    "form.additional": "HİZMET REZERVASYON FORMU",
    "disclaimer": "Tüm ek hizmetler misafirin kendi hesabına aittir",
    "bulk.noneSelected": "Lütfen en az bir kupon seçin",
    "bulk.cannotMarkPaid": "Ödendi olarak işaretlenemez:",
    "bulk.cannotComplete": "Tamamlandı olarak işaretlenemez:",
    "bulk.cannotCancel": "İptal edilemez:",
    "bulk.markedPaid": "Ödendi olarak işaretlendi:",
    "bulk.completed": "Tamamlandı olarak işaretlendi:",
    "bulk.cancelled": "İptal edildi:",
    "voucherSingular": "kupon",
    "voucherPlural": "kupon",
}

TRANSLATIONS = MappingProxyType({
    Language.ENGLISH: MappingProxyType(_ENGLISH),
    Language.ARABIC: MappingProxyType(_ARABIC),
    Language.TURKISH: MappingProxyType(_TURKISH),
})


def normalize_language(language: Optional[str]) -> Language:
    """Resolve a language name (any case) or ISO code; unknown -> English."""
    if isinstance(language, Language):
        return language
    name = (language or "").strip().lower()
    for lang in Language:
        if lang.value == name:
            return lang
    return _ALIASES.get(name, DEFAULT_LANGUAGE)


def lookup(key: str, language: Optional[str] = None) -> str:
    """Label for key in language, falling back to English, then to the key."""
    table = TRANSLATIONS[normalize_language(language)]
    text = table.get(key) or TRANSLATIONS[DEFAULT_LANGUAGE].get(key)
    return text if text else key


def translator(language: Optional[str] = None) -> Callable[[str], str]:
    """Bind lookup to one language."""
    lang = normalize_language(language)

    def t(key: str) -> str:
        return lookup(key, lang)

    return t
