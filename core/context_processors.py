from django.conf import settings


def site(request):
    return {
        "gym_name": getattr(settings, "GYM_NAME", "TopDog Gym"),
        "gym_contact_email": getattr(settings, "GYM_CONTACT_EMAIL", ""),
        "gym_contact_phone": getattr(settings, "GYM_CONTACT_PHONE", ""),
        "gym_location": getattr(settings, "GYM_LOCATION", ""),
    }
