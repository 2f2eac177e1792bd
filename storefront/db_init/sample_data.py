"""
Sample catalog and users for local development
"""

from datetime import date, timedelta
from decimal import Decimal

from storefront.extensions import db
from storefront.models import Tour, Space, User
from storefront.models.enums import MembershipTier, SpaceType, UserRole


SAMPLE_TOURS = [
    {
        'destination': 'Cataratas del Iguazú',
        'price_logistics': Decimal('80000'),
        'price_ticket': Decimal('25000'),
        'km': 900,
        'days_ahead': 30,
        'capacity': 40,
        'itinerary': ['Salida desde Corrientes', 'Parque Nacional', 'Regreso'],
    },
    {
        'destination': 'Salta y Jujuy',
        'price_logistics': Decimal('180000'),
        'price_ticket': Decimal('45000'),
        'km': 1500,
        'days_ahead': 45,
        'capacity': 30,
        'itinerary': ['Salta', 'Purmamarca', 'Humahuaca', 'Regreso'],
    },
    {
        'destination': 'Esteros del Iberá',
        'price_logistics': Decimal('40000'),
        'price_ticket': Decimal('12000'),
        'km': 350,
        'days_ahead': 10,
        'capacity': 20,
        'itinerary': ['Colonia Carlos Pellegrini', 'Paseo en lancha'],
    },
]

SAMPLE_SPACES = [
    {'name': 'Quincho Niño Jesús', 'type': SpaceType.QUINCHO, 'price': Decimal('60000'),
     'damage_deposit': Decimal('20000'), 'cleaning_fee': Decimal('8000'), 'capacity': 40},
    {'name': 'Departamento Centro', 'type': SpaceType.DEPTO, 'price': Decimal('35000'),
     'damage_deposit': Decimal('15000'), 'cleaning_fee': Decimal('5000'), 'capacity': 4},
]


def create_sample_catalog():
    today = date.today()
    tours = []
    for item in SAMPLE_TOURS:
        data = dict(item)
        start = today + timedelta(days=data.pop('days_ahead'))
        tour = Tour(
            price=data['price_logistics'] + data['price_ticket'],
            start_date=start,
            end_date=start + timedelta(days=3),
            deadline=start - timedelta(days=5),
            **data
        )
        db.session.add(tour)
        tours.append(tour)

    spaces = []
    for item in SAMPLE_SPACES:
        space = Space(rules=['No se permite música después de las 2 AM'], **item)
        db.session.add(space)
        spaces.append(space)

    db.session.commit()
    return tours, spaces


def create_sample_users():
    users = [
        User(email='admin@gnmtour.com.ar', name='Admin', role=UserRole.ADMIN,
             membership_tier=MembershipTier.ELITE),
        User(email='socio.plus@example.com', name='Socio Plus',
             membership_tier=MembershipTier.PLUS, used_km_this_month=2000),
        User(email='visitante@example.com', name='Visitante'),
    ]
    db.session.add_all(users)
    db.session.commit()
    return users
