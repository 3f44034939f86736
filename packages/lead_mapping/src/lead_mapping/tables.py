"""Mapping tables from the call-center webhook format to CRM fields.

To change where a CRM field comes from, edit its ``source`` or swap the
transform. Field names are Bitrix24 lead fields.
"""

from lead_mapping.engine import MULTIPLE, STATIC, FieldSpec
from lead_mapping.transforms import lead_comments, lead_name, lead_phone

LEAD_SOURCE_DESCRIPTION = "Звонок AI-ассистента (вебхук колл-центра)"

LEAD_MAPPING: dict[str, FieldSpec] = {
    "COMMENTS": FieldSpec(source=MULTIPLE, transform=lead_comments),
    "NAME": FieldSpec(source="call.agreements.client_name", transform=lead_name),
    "PHONE": FieldSpec(source="contact.phone", transform=lead_phone),
    "SOURCE_DESCRIPTION": FieldSpec(source=STATIC, value=LEAD_SOURCE_DESCRIPTION),
}
