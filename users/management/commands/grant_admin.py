from django.core.management.base import BaseCommand, CommandError

from authx.identity import IdentityProviderUnavailable, UserNotFound, get_identity_provider
from users.models import Admin


class Command(BaseCommand):
    help = "Adds a user to the admins set by email. Used to bootstrap the first admin."

    def add_arguments(self, parser):
        parser.add_argument("email")

    def handle(self, *args, **options):
        email = options["email"]

        try:
            user = get_identity_provider().get_user_by_email(email)
        except UserNotFound:
            raise CommandError(f"No user found with email {email}")
        except IdentityProviderUnavailable as exc:
            raise CommandError(str(exc))

        admin, created = Admin.objects.get_or_create(
            uid=user["uid"], defaults={"email": user["email"] or email}
        )
        if created:
            self.stdout.write(self.style.SUCCESS(f"Promoted {admin.email} to admin"))
        else:
            self.stdout.write(f"{admin.email} is already an admin")
