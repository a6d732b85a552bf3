"""
apps.form_config.models
~~~~~~~~~~~~~~~~~~~~~~~
EntityFieldConfiguration – a tenant's override of one catalog field.
"""
from django.db import models

from apps.form_catalog.models import FieldDefinition
from apps.tenants.models import HealthcareEntity


class EntityFieldConfiguration(models.Model):
    """
    Sparse per-(tenant, field) override row.

    Absence of a row means the tenant inherits every catalog default for
    that field.  ``custom_label`` blank means "use the catalog display name";
    ``sort_order`` null means "use the catalog sort order".

    Rows are upserted on ``(tenant, field_definition)``; that unique
    constraint is the conflict target of every write.
    """

    tenant = models.ForeignKey(
        HealthcareEntity,
        on_delete=models.CASCADE,
        related_name="field_configurations",
    )
    field_definition = models.ForeignKey(
        FieldDefinition,
        on_delete=models.CASCADE,
        related_name="entity_configurations",
    )
    is_enabled = models.BooleanField(default=True)
    is_required = models.BooleanField(default=False)
    custom_label = models.CharField(max_length=200, blank=True, default="")
    custom_validation = models.JSONField(default=dict, blank=True)
    sort_order = models.IntegerField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["tenant", "field_definition"]
        constraints = [
            models.UniqueConstraint(
                fields=["tenant", "field_definition"],
                name="unique_tenant_field_configuration",
            ),
        ]
        indexes = [
            models.Index(fields=["tenant"]),
        ]
        verbose_name = "Entity Field Configuration"
        verbose_name_plural = "Entity Field Configurations"

    def __str__(self) -> str:
        state = "on" if self.is_enabled else "off"
        return f"tenant {self.tenant_id} / field {self.field_definition_id} [{state}]"
