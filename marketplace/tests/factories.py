import random
import uuid
from decimal import Decimal

import factory
from django.contrib.auth import get_user_model
from faker import Faker

from marketplace.domain.lifecycle import BookingStatus, ContractStatus, QuoteStatus, RequestStatus
from marketplace.models import (
    BindingTerms,
    BookingRequest,
    Contract,
    ContractClause,
    MaintenanceRequest,
    QuoteSubmission,
    SellerReview,
)
from notifications.models import Notification

User = get_user_model()
fake = Faker()


class UserFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = User

    id = factory.LazyFunction(uuid.uuid4)
    username = factory.Sequence(lambda n: f"buyer_{n}")
    email = factory.Sequence(lambda n: f"buyer_{n}@example.com")
    password = factory.PostGenerationMethodCall("set_password", "defaultpassword")
    is_active = True
    role = "buyer"
    language = "en"


class SellerFactory(UserFactory):
    role = "seller"
    username = factory.Sequence(lambda n: f"seller_{n}")
    email = factory.Sequence(lambda n: f"seller_{n}@example.com")

    @factory.post_generation
    def profile_data(self, create, extracted, **kwargs):
        """SellerFactory(profile_data={"city": "Riyadh"}) updates the auto-created profile."""
        if not create:
            return
        values = {"service_categories": ["plumbing", "electrical"], "city": "Riyadh"}
        values.update(extracted or {})
        for field, value in values.items():
            setattr(self.profile, field, value)
        self.profile.save()


class AdminFactory(UserFactory):
    role = "admin"
    is_superuser = True
    is_staff = True
    username = factory.Sequence(lambda n: f"admin_{n}")
    email = factory.Sequence(lambda n: f"admin_{n}@example.com")


class MaintenanceRequestFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = MaintenanceRequest

    buyer = factory.SubFactory(UserFactory)
    title = factory.Sequence(lambda n: f"Leaking kitchen sink {n}")
    category = "plumbing"
    description = factory.LazyFunction(lambda: fake.paragraph(nb_sentences=4) + " Water under the cabinet.")
    urgency = "medium"
    city = "Riyadh"
    location = factory.Faker("street_address")
    estimated_budget_min = Decimal("200.00")
    estimated_budget_max = Decimal("800.00")
    status = RequestStatus.OPEN


class QuoteFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = QuoteSubmission

    request = factory.SubFactory(MaintenanceRequestFactory)
    seller = factory.SubFactory(SellerFactory)
    price = factory.LazyFunction(lambda: Decimal(f"{random.randint(300, 900)}.00"))
    estimated_duration = "2 days"
    proposal = factory.LazyFunction(lambda: "Replace the trap and reseal all joints. " + fake.sentence())
    status = QuoteStatus.PENDING


class BookingFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = BookingRequest

    buyer = factory.SubFactory(UserFactory)
    seller = factory.SubFactory(SellerFactory)
    service_category = "electrical"
    job_description = factory.LazyFunction(lambda: "Install four ceiling lights. " + fake.sentence())
    location_city = "Jeddah"
    budget_range = "500-1000 SAR"
    status = BookingStatus.PENDING


class ContractFactory(factory.django.DjangoModelFactory):
    """Quote contract awaiting the buyer's signature, with default binding terms."""

    class Meta:
        model = Contract

    quote = factory.SubFactory(QuoteFactory)
    request = factory.LazyAttribute(lambda o: o.quote.request)
    buyer = factory.LazyAttribute(lambda o: o.quote.request.buyer)
    seller = factory.LazyAttribute(lambda o: o.quote.seller)
    status = ContractStatus.PENDING_BUYER
    metadata = factory.LazyAttribute(lambda o: {"final_price": str(o.quote.price)})

    @factory.post_generation
    def terms(self, create, extracted, **kwargs):
        if create:
            BindingTerms.objects.create(contract=self, **(extracted or {}))


class ContractClauseFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = ContractClause
        django_get_or_create = ("key",)

    key = factory.Sequence(lambda n: f"clause-{n}")
    title_en = factory.Sequence(lambda n: f"Clause {n}")
    title_ar = factory.Sequence(lambda n: f"البند {n}")
    content_en = "The parties are {{ buyer_name }} and {{ seller_name }}."
    content_ar = "الطرفان هما {{ buyer_name }} و {{ seller_name }}."
    display_order = factory.Sequence(lambda n: n * 10)


class SellerReviewFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = SellerReview

    seller = factory.SubFactory(SellerFactory)
    buyer = factory.SubFactory(UserFactory)
    rating = factory.Faker("random_int", min=1, max=5)
    review_text = factory.Faker("sentence", nb_words=12)


class NotificationFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Notification

    user = factory.SubFactory(UserFactory)
    title = "Quote Accepted"
    title_ar = "تم قبول عرضك"
    message = "Your quote was accepted."
    message_ar = "تم قبول عرضك."
    notification_type = "quote_accepted"
    content_id = factory.LazyFunction(lambda: str(uuid.uuid4()))
