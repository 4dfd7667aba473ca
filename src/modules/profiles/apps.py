from django.apps import AppConfig


class ProfilesConfig(AppConfig):
    name = "modules.profiles"
    label = "profiles"
