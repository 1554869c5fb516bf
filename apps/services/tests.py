from django.test import SimpleTestCase

from apps.services.catalog import ServiceType, all_services, get_service


class CatalogTests(SimpleTestCase):

    def test_six_services_one_per_type(self):
        services = all_services()
        self.assertEqual([s.id for s in services],
                         ['laboratory', 'dental', 'consultation', 'prescription', 'treatment', 'home'])
        self.assertEqual({s.type for s in services}, set(ServiceType.values))

    def test_lookup_is_case_insensitive(self):
        self.assertEqual(get_service(' Laboratory ').id, 'laboratory')
        self.assertIsNone(get_service('surgery'))
        self.assertIsNone(get_service(''))
        self.assertIsNone(get_service(None))

    def test_only_lab_and_dental_have_test_options(self):
        with_options = {s.id for s in all_services() if s.test_options}
        self.assertEqual(with_options, {'laboratory', 'dental'})
        self.assertEqual(len(get_service('laboratory').test_options), 6)
        self.assertEqual(len(get_service('dental').test_options), 5)

    def test_slots(self):
        lab = get_service('laboratory')
        self.assertTrue(lab.has_slot('09:00 AM'))
        self.assertFalse(lab.has_slot('09:00 PM'))
        self.assertFalse(lab.has_slot(''))

    def test_test_label_falls_back_to_value(self):
        dental = get_service('dental')
        self.assertEqual(dental.test_label('root-canal'), 'Root Canal Treatment')
        self.assertEqual(dental.test_label('whitening'), 'whitening')


class ServicesPageTests(SimpleTestCase):

    def test_lists_every_service_with_booking_link(self):
        response = self.client.get('/services/')
        self.assertEqual(response.status_code, 200)
        for service in all_services():
            self.assertContains(response, f'/appointments/?service={service.id}')
