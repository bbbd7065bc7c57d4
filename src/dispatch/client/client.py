"""Client aggregate — a customer profile, as kept in ``clients``.

Orders carry their own copy of the customer contact; the profile is only
consulted when an event (checkout progress) references a client by id.
"""

from protean.fields import String

from dispatch.domain import dispatch


@dispatch.aggregate
class Client:
    name = String(max_length=200)
    phone = String(max_length=50)
    email = String(max_length=254)
