import logging

from django.core.management.base import BaseCommand
from django.db import transaction

from marketplace.contracts.domain.models import ContractClause


logger = logging.getLogger(__name__)

# Clause bodies are Django templates rendered with the contract variables.
CLAUSES = [
    {
        "key": "parties",
        "title_en": "Parties",
        "title_ar": "الأطراف",
        "content_en": (
            "This agreement is made on {{ contract_date }} between {{ buyer_name }} ({{ buyer_company }}), "
            "the client, and {{ seller_name }} {% if seller_company %}({{ seller_company }}){% endif %}, "
            "the service provider."
        ),
        "content_ar": (
            "أبرم هذا العقد بتاريخ {{ contract_date }} بين {{ buyer_name }} ({{ buyer_company }}) بصفته العميل، "
            "و{{ seller_name }} {% if seller_company %}({{ seller_company }}){% endif %} بصفته مقدم الخدمة."
        ),
    },
    {
        "key": "scope-of-work",
        "title_en": "Scope of Work",
        "title_ar": "نطاق العمل",
        "content_en": (
            "Project: {{ project_title }} ({{ service_category }}). {{ project_description }} "
            "Work location: {{ work_location }}."
        ),
        "content_ar": (
            "المشروع: {{ project_title }} ({{ service_category }}). {{ project_description }} "
            "موقع العمل: {{ work_location }}."
        ),
    },
    {
        "key": "schedule",
        "title_en": "Schedule and Site Access",
        "title_ar": "الجدول الزمني والدخول إلى الموقع",
        "content_en": (
            "Work starts on {{ start_date }} and is completed by {{ completion_date }}. "
            "The client grants site access during {{ access_hours }}."
        ),
        "content_ar": (
            "يبدأ العمل في {{ start_date }} وينتهي بحلول {{ completion_date }}. "
            "يتيح العميل الدخول إلى الموقع خلال الساعات {{ access_hours }}."
        ),
    },
    {
        "key": "payment",
        "title_en": "Price and Payment Schedule",
        "title_ar": "السعر وجدول الدفع",
        "content_en": (
            "The contract price is {{ total_amount }} SAR plus VAT of {{ vat_amount }} SAR, "
            "a total of {{ total_with_vat }} SAR. Deposit {{ deposit_pct }}% ({{ deposit_amount }} SAR), "
            "progress payment {{ progress_pct }}% ({{ progress_amount }} SAR) and "
            "final payment {{ final_pct }}% ({{ final_amount }} SAR) on completion."
        ),
        "content_ar": (
            "قيمة العقد {{ total_amount }} ريال بالإضافة إلى ضريبة القيمة المضافة {{ vat_amount }} ريال، "
            "بإجمالي {{ total_with_vat }} ريال. دفعة مقدمة {{ deposit_pct }}% ({{ deposit_amount }} ريال)، "
            "ودفعة مرحلية {{ progress_pct }}% ({{ progress_amount }} ريال)، "
            "ودفعة نهائية {{ final_pct }}% ({{ final_amount }} ريال) عند الإنجاز."
        ),
    },
    {
        "key": "deposit-escrow",
        "title_en": "Deposit Escrow",
        "title_ar": "حساب الضمان للدفعة المقدمة",
        "content_en": (
            "The deposit of {{ deposit_amount }} SAR is held in escrow and released to the service provider "
            "when work starts on site."
        ),
        "content_ar": "تحفظ الدفعة المقدمة البالغة {{ deposit_amount }} ريال في حساب ضمان وتصرف لمقدم الخدمة عند بدء العمل.",
        "requires_escrow": True,
    },
    {
        "key": "warranty",
        "title_en": "Warranty",
        "title_ar": "الضمان",
        "content_en": (
            "The service provider warrants the work for {{ warranty_days }} days from the date the client "
            "confirms completion. The warranty does not apply when the client does not confirm completion."
        ),
        "content_ar": (
            "يضمن مقدم الخدمة العمل لمدة {{ warranty_days }} يوماً من تاريخ تأكيد العميل للإنجاز. "
            "لا يسري الضمان إذا لم يؤكد العميل الإنجاز."
        ),
    },
    {
        "key": "governing-law",
        "title_en": "Governing Law",
        "title_ar": "القانون الحاكم",
        "content_en": "This agreement is governed by the laws of the Kingdom of Saudi Arabia.",
        "content_ar": "يخضع هذا العقد لأنظمة المملكة العربية السعودية.",
    },
]


class Command(BaseCommand):
    help = "Seeds the bilingual contract clauses used to render contract documents."

    def handle(self, *args, **options):
        self.stdout.write(self.style.SUCCESS("Seeding contract clauses..."))

        created_count = 0
        with transaction.atomic():
            for order, clause in enumerate(CLAUSES, start=1):
                defaults = {key: value for key, value in clause.items() if key != "key"}
                defaults["display_order"] = order * 10
                _, created = ContractClause.objects.update_or_create(key=clause["key"], defaults=defaults)
                if created:
                    self.stdout.write(self.style.SUCCESS(f"Created clause: {clause['key']}"))
                    created_count += 1
                else:
                    self.stdout.write(self.style.WARNING(f"Updated clause: {clause['key']}"))

        self.stdout.write(self.style.SUCCESS(f"Clause seeding complete. Created {created_count} clauses."))
