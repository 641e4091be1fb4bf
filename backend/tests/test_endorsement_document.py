import datetime as dt

import pytest

from drivers_service.domain.entities.document import Document
from drivers_service.domain.entities.emergency_contact import EmergencyContact
from drivers_service.domain.entities.endorsement import Endorsement
from drivers_service.domain.exceptions import InvalidDocumentTypeError, InvalidEndorsementTypeError


class TestEndorsement:
    def test_type_is_uppercased(self):
        e = Endorsement.create(type="h")
        assert e.type == "H"
        assert e.description == "Hazardous Materials"

    @pytest.mark.parametrize("bad", ["Z", "", "HX"])
    def test_unknown_type_rejected(self, bad):
        with pytest.raises(InvalidEndorsementTypeError, match="Invalid endorsement type"):
            Endorsement.create(type=bad)

    def test_update(self):
        e = Endorsement.create(type="N")
        e.update(type="x", expiry_date=dt.date(2031, 1, 1))
        assert e.type == "X"
        assert e.expiry_date == dt.date(2031, 1, 1)

    def test_invalid_update_leaves_endorsement_unchanged(self):
        e = Endorsement.create(type="P", expiry_date=dt.date(2031, 1, 1))
        with pytest.raises(InvalidEndorsementTypeError):
            e.update(type="Q")
        assert e.type == "P"

    def test_is_expired(self):
        e = Endorsement.create(type="T", expiry_date=dt.date(2030, 5, 1))
        assert e.is_expired(today=dt.date(2030, 5, 2))
        assert not e.is_expired(today=dt.date(2030, 5, 1))
        assert not Endorsement.create(type="T").is_expired()


class TestDocument:
    def test_create_and_helpers(self):
        doc = Document.create(file_name="Medical.Card.PDF", file_url="uploads/a.pdf", file_type="medical_certificate")
        assert doc.id
        assert doc.file_extension == "pdf"
        assert doc.is_pdf()
        assert not doc.is_image()
        assert doc.type_description == "Medical Certificate"

    def test_image_and_extensionless(self):
        assert Document.create(file_name="front.JPG", file_url="u", file_type="license").is_image()
        bare = Document.create(file_name="scan", file_url="u", file_type="other")
        assert bare.file_extension == ""
        assert not bare.is_image() and not bare.is_pdf()

    def test_unknown_type_rejected(self):
        with pytest.raises(InvalidDocumentTypeError, match="Invalid document type: passport"):
            Document.create(file_name="p.pdf", file_url="u", file_type="passport")

    def test_invalid_update_leaves_document_unchanged(self):
        doc = Document.create(file_name="a.pdf", file_url="u", file_type="license")
        with pytest.raises(InvalidDocumentTypeError):
            doc.update(file_name="b.pdf", file_type="passport")
        assert doc.file_name == "a.pdf"
        assert doc.file_type == "license"


class TestEmergencyContact:
    def test_validity(self):
        assert EmergencyContact.create(name="Amina", relationship="Spouse", phone="+1 555 987 6543").is_valid()
        assert not EmergencyContact.create(name="Amina", relationship="", phone="5559876543").is_valid()
        assert not EmergencyContact.create(name="Amina", relationship="Spouse", phone="555-9876").is_valid()

    def test_update_ignores_blank_values(self):
        c = EmergencyContact.create(name="Amina", relationship="Spouse", phone="5559876543")
        c.update(name="", phone="5551112222")
        assert c.name == "Amina"
        assert c.phone == "5551112222"
