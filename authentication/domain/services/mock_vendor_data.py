"""Name pools, company names and bio templates for system generated vendors."""

# Weighted Saudi name pools: very common < 0.4, common < 0.7, medium < 0.9, rare otherwise
MALE_FIRST_NAMES = {
    "very_common": ["محمد", "أحمد", "عبدالله", "علي", "خالد"],
    "common": ["سعد", "عمر", "فهد", "سلطان", "ناصر", "فيصل", "وليد"],
    "medium": ["تركي", "بندر", "طارق", "هاني", "محمود", "عادل", "حسن", "يوسف"],
    "rare": ["زياد", "غسان", "هشام", "كريم", "سامي", "نايف", "مشعل", "ثامر", "راشد", "ماجد", "بدر", "عبدالعزيز"],
}

FEMALE_FIRST_NAMES = ["نورة", "هند", "مريم", "سارة", "فاطمة", "العنود", "لطيفة", "ريم"]

LAST_NAMES = {
    "very_common": ["القحطاني", "العتيبي", "الشمري", "الدوسري", "الغامدي", "الزهراني"],
    "common": ["الحربي", "المطيري", "العمري", "السهلي", "السعيد", "الأحمد", "المالكي"],
    "medium": ["الجهني", "الشهري", "القرني", "العنزي", "العصيمي", "البقمي"],
    "rare": ["الصقيه", "الخالدي", "البلوي", "الرشيدي", "الفهد", "السبيعي", "الثبيتي"],
}

ENGLISH_TRANSLITERATIONS = {
    "محمد": "Mohammed",
    "أحمد": "Ahmed",
    "عبدالله": "Abdullah",
    "علي": "Ali",
    "خالد": "Khalid",
    "سعد": "Saad",
    "عمر": "Omar",
    "فهد": "Fahad",
    "سلطان": "Sultan",
    "ناصر": "Nasser",
    "فيصل": "Faisal",
    "وليد": "Waleed",
    "تركي": "Turki",
    "بندر": "Bandar",
    "طارق": "Tariq",
    "هاني": "Hani",
    "محمود": "Mahmoud",
    "عادل": "Adel",
    "حسن": "Hassan",
    "يوسف": "Youssef",
    "القحطاني": "Alqahtani",
    "العتيبي": "Alotaibi",
    "الشمري": "Alshamri",
    "الدوسري": "Aldosari",
    "الغامدي": "Alghamdi",
    "الزهراني": "Alzahrani",
    "الحربي": "Alharbi",
    "المطيري": "Almutairi",
    "العمري": "Alomari",
    "الجهني": "Aljuhani",
    "الشهري": "Alshahri",
    "القرني": "Alqarni",
    "السهلي": "Alsuhali",
    "السعيد": "Alsaeed",
    "الأحمد": "Alahmed",
}

# Profession used as a surname, and the category it forces
PROFESSIONS = {
    "سباكة": "plumbing",
    "كهرباء": "electrical",
    "نجارة": "carpentry",
    "دهان": "painting",
    "تكييف": "ac_repair",
}

COMPANY_VENDORS = {
    "النجارة الحديثة": ["carpentry", "handyman"],
    "كهرباء المدينة": ["electrical", "appliances"],
    "السباكة السريعة": ["plumbing"],
    "دهانات الفخامة": ["painting"],
    "تكييف الخليج": ["ac_repair"],
}

VENDOR_CATEGORIES = [
    "plumbing",
    "electrical",
    "ac_repair",
    "carpentry",
    "painting",
    "cleaning",
    "landscaping_home",
    "handyman",
    "appliances",
]

AVAILABILITY_STATUSES = ["accepting_requests", "busy", "fully_booked"]
CREW_SIZES = ["1-3", "4-10", "11-20", "20+"]

COMPANY_BIO_EN = "Professional maintenance and repair services"
ARABIC_BIO_EN = "Experienced maintenance professional"
ENGLISH_BIO_AR = "محترف صيانة ذو خبرة"

BIO_TEMPLATES = {
    "plumbing": [
        "سباك في جدة منذ ٢٠ سنة - تسليك مجاري وتركيب صحي",
        "خبرة ١٥ سنة في السباكة - أعمال المنازل والشركات",
        "متخصص في كشف تسربات المياه بأحدث الأجهزة",
        "سباك ممتاز - خدمة سريعة ٢٤ ساعة",
        "أعمال السباكة والتسليك - أسعار منافسة",
        "تركيب وصيانة الأدوات الصحية",
        "خبرة في إصلاح جميع مشاكل السباكة",
        "سباك محترف - ضمان على الأعمال",
    ],
    "electrical": [
        "كهربائي منازل وشقق - تمديدات وصيانة",
        "فني كهرباء خبرة ١٢ سنة - أعمال التكييف أيضاً",
        "كهربائي محترف - إصلاح الأعطال فوراً",
        "متخصص في التمديدات الكهربائية والإنارة",
        "كهربائي معتمد - لوحات كهرباء وتأسيس",
        "أعمال الكهرباء للمنازل والمحلات",
        "فني كهرباء ذو خبرة - أسعار مناسبة",
        "تركيب الإنارة والثريات",
    ],
    "ac_repair": [
        "فني تكييف مركزي وسبليت - صيانة وتركيب",
        "متخصص في صيانة المكيفات - خدمة منازل",
        "تنظيف وإصلاح جميع أنواع المكيفات",
        "فني تبريد وتكييف معتمد - خبرة ١٠ سنوات",
        "صيانة تكييف سريعة ومضمونة",
        "أعمال التكييف والتبريد الشامل",
        "فني مكيفات محترف - متوفر دائماً",
    ],
    "carpentry": [
        "نجار أثاث ومطابخ - تفصيل حسب الطلب",
        "أعمال النجارة والديكور الخشبي",
        "نجار خبرة في تركيب الأبواب والشبابيك",
        "نجارة منازل - إصلاح وتجديد",
        "تصميم وتنفيذ الأثاث الخشبي",
        "نجار محترف - أسعار تنافسية",
        "خبرة في النجارة المسلحة والديكور",
    ],
    "painting": [
        "دهان منازل وديكورات - ألوان حديثة",
        "أعمال الدهانات الداخلية والخارجية",
        "دهان محترف - أسعار تنافسية",
        "معلم دهانات - جميع أنواع الأصباغ",
        "دهانات فاخرة للفلل والقصور",
        "أعمال الدهان والديكور",
        "دهان خبرة طويلة - عمل نظيف",
    ],
    "cleaning": [
        "تنظيف شقق ومنازل - خدمة يومية أو شهرية",
        "تنظيف عميق للمنازل والفلل",
        "عامل نظافة محترف - أسعار مناسبة",
        "خدمات تنظيف شاملة - فريق متخصص",
        "تنظيف منازل بعد الدهان والتشطيب",
    ],
    "landscaping_home": [
        "تنسيق حدائق وزراعة - صيانة دورية",
        "أعمال البستنة والعناية بالحدائق",
        "تصميم وتنفيذ الحدائق المنزلية",
        "متخصص في الزراعة والري",
        "تنسيق حدائق احترافي",
    ],
    "handyman": [
        "صيانة عامة للمنازل والشقق",
        "أعمال صيانة منزلية شاملة",
        "عامل صيانة - كهرباء وسباكة ونجارة",
        "خدمات متنوعة - إصلاحات منزلية",
        "فني صيانة عامة - جميع الخدمات",
        "صيانة وإصلاحات فورية",
    ],
    "general_en": [
        "Experienced plumber - 8 years in Riyadh",
        "Professional electrician for homes and offices",
        "AC technician - installation and repair specialist",
        "Skilled carpenter - custom furniture and doors",
        "Expert painter - interior and exterior work",
        "Handyman services - all home repairs",
        "Professional cleaner - daily or weekly service",
        "HVAC specialist - split and central systems",
        "Certified electrician - 10+ years experience",
        "Plumbing expert - leak detection and repairs",
        "Carpenter with 12 years experience",
        "Painting contractor - quality finish guaranteed",
    ],
}

# Arabic keyword in a bio -> category it implies
BIO_KEYWORDS = [
    ("سباك", "plumbing"),
    ("كهرباء", "electrical"),
    ("تكييف", "ac_repair"),
    ("نجار", "carpentry"),
    ("دهان", "painting"),
    ("تنظيف", "cleaning"),
    ("حدائق", "landscaping_home"),
]
