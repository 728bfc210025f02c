import bleach
from rest_framework import serializers

from clinical.models import Doctor, Patient

TEXT_FIELDS = (
    'patient_id', 'full_name', 'blood_type', 'phone', 'address',
    'emergency_contact', 'emergency_phone', 'department', 'condition', 'notes',
)


class CommaListField(serializers.Field):
    """Accepts ``"Lisinopril, Aspirin"`` or ``["Lisinopril", "Aspirin"]``."""

    default_error_messages = {'invalid': 'Expected a comma separated string or a list of strings.'}

    def to_internal_value(self, data):
        if data is None:
            return []
        if isinstance(data, str):
            items = data.split(',')
        elif isinstance(data, (list, tuple)):
            items = data
        else:
            self.fail('invalid')
        return [bleach.clean(str(i).strip(), strip=True) for i in items if str(i).strip()]

    def to_representation(self, value):
        return list(value or [])


class PatientCreateSerializer(serializers.Serializer):
    patient_id = serializers.CharField(required=False, allow_blank=True, max_length=20)
    full_name = serializers.CharField(max_length=255)
    age = serializers.IntegerField(min_value=0, max_value=150)
    gender = serializers.ChoiceField(choices=[c for c, _ in Patient.GENDER_CHOICES])
    blood_type = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=5)
    phone = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=32)
    email = serializers.EmailField(required=False, allow_blank=True, allow_null=True)
    address = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=255)
    emergency_contact = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=255)
    emergency_phone = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=32)
    department = serializers.CharField(max_length=100)
    condition = serializers.CharField(max_length=255)
    status = serializers.ChoiceField(choices=[c for c, _ in Patient.STATUS_CHOICES], default=Patient.STATUS_STABLE)
    room_id = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    assigned_doctor_id = serializers.IntegerField(required=False, allow_null=True)
    medications = CommaListField(required=False, default=list)
    allergies = CommaListField(required=False, default=list)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def validate_room_id(self, v):
        v = (v or '').strip() if isinstance(v, str) else v
        if v in (None, ''):
            return None
        try:
            return int(v)
        except (TypeError, ValueError):
            raise serializers.ValidationError('Room must be a valid room id.')

    def validate_assigned_doctor_id(self, v):
        if v is not None and not Doctor.objects.filter(pk=v).exists():
            raise serializers.ValidationError('Doctor does not exist.')
        return v

    def validate_full_name(self, v):
        v = bleach.clean((v or '').strip(), strip=True)
        if len(v) < 2:
            raise serializers.ValidationError('Name must be at least 2 characters.')
        return v

    def validate(self, attrs):
        for field in TEXT_FIELDS:
            value = attrs.get(field)
            if isinstance(value, str):
                attrs[field] = bleach.clean(value.strip(), strip=True)
        for field in ('department', 'condition'):
            if not attrs.get(field):
                raise serializers.ValidationError({field: 'This field may not be blank.'})
        if attrs.get('room_id') is not None and attrs.get('status') == Patient.STATUS_DISCHARGED:
            raise serializers.ValidationError({'room_id': 'A discharged patient cannot be admitted into a room.'})
        return attrs


class SearchQuerySerializer(serializers.Serializer):
    q = serializers.CharField(required=False, allow_blank=True, max_length=100, trim_whitespace=False)
