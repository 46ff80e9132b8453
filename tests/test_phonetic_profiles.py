import dataclasses
import unittest

from phonetic_profiles import (
    KEY_BINDINGS,
    PHONETIC_PROFILES,
    WEDGE_PROFILES,
    PhoneticType,
    binding_for_key,
    get_profile,
)


class TestPhoneticProfiles(unittest.TestCase):
    def test_every_type_has_profiles(self):
        self.assertEqual(set(PHONETIC_PROFILES), set(PhoneticType))
        self.assertEqual(set(WEDGE_PROFILES), set(PhoneticType))

    def test_lookup_by_string(self):
        self.assertIs(get_profile("plosive"), PHONETIC_PROFILES[PhoneticType.PLOSIVE])

    def test_only_trill_modulates(self):
        for phonetic_type, profile in PHONETIC_PROFILES.items():
            if phonetic_type is PhoneticType.TRILL:
                self.assertEqual(profile.modulation_rate, 25.0)
            else:
                self.assertIsNone(profile.modulation_rate)

    def test_profiles_are_immutable(self):
        profile = get_profile("vowel")
        with self.assertRaises(dataclasses.FrozenInstanceError):
            profile.duration = 1
        with self.assertRaises(TypeError):
            PHONETIC_PROFILES[PhoneticType.VOWEL] = profile

    def test_envelope_windows_fit_duration(self):
        for profile in PHONETIC_PROFILES.values():
            self.assertLess(profile.attack_time, profile.duration - profile.decay_time)

    def test_key_bindings(self):
        self.assertEqual({b.phonetic_type for b in KEY_BINDINGS}, set(PhoneticType))
        self.assertEqual(binding_for_key("s").phonetic_type, PhoneticType.FRICATIVE)
        self.assertIsNone(binding_for_key("z"))
        self.assertIsNone(binding_for_key(""))


if __name__ == "__main__":
    unittest.main()
