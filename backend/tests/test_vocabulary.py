from services import vocabulary


class TestCodes:
    def test_find_code(self):
        code = vocabulary.find_code("17S_AF")
        assert code.title == "Cyber Warfare Operations Officer"
        assert code.branch == "Air Force"

    def test_find_code_unknown(self):
        assert vocabulary.find_code("ZZZ") is None
        assert vocabulary.find_code(None) is None

    def test_codes_for_branch_filters_branch_and_service_type(self):
        codes = vocabulary.codes_for_branch("Air Force", "Officer")
        assert codes
        assert all(c.branch == "Air Force" and c.service_type == "Officer" for c in codes)

    def test_is_valid_mos(self):
        assert vocabulary.is_valid_mos("17S_AF", "Air Force", "Officer")
        assert not vocabulary.is_valid_mos("17S_AF", "Army")
        assert not vocabulary.is_valid_mos("17S_AF", "Air Force", "Enlisted")
        assert not vocabulary.is_valid_mos("NOPE")

    def test_printed_code(self):
        assert vocabulary.printed_code("17S_AF") == "17S"
        assert vocabulary.printed_code("25B") == "25B"

    def test_resolve_code(self):
        assert vocabulary.resolve_code("17S_AF", "Air Force") == "17S_AF"
        assert vocabulary.resolve_code("17s", "Air Force", "Officer") == "17S_AF"
        assert vocabulary.resolve_code("IS", "Coast Guard") == "IS_CG"
        assert vocabulary.resolve_code("IS", "Navy") == "IS"
        assert vocabulary.resolve_code("17S") == "17S"
        assert vocabulary.resolve_code(None) is None


class TestRanksAndBranches:
    def test_rank_description(self):
        assert vocabulary.rank_description("O-3") == "Captain/Lieutenant"
        assert vocabulary.rank_description("X-1") == ""

    def test_service_type_for_rank(self):
        assert vocabulary.service_type_for_rank("E-5") == "Enlisted"
        assert vocabulary.service_type_for_rank("W-2") == "Warrant Officer"
        assert vocabulary.service_type_for_rank("O-6") == "Officer"
        assert vocabulary.service_type_for_rank("O-9") is None

    def test_normalize_branch(self):
        assert vocabulary.normalize_branch("USMC") == "Marine Corps"
        assert vocabulary.normalize_branch(" air force ") == "Air Force"
        assert vocabulary.normalize_branch("Starfleet") is None


class TestSkillWeights:
    def test_known_weights(self):
        assert vocabulary.skill_weight("Cybersecurity") == 1.5
        assert vocabulary.skill_weight("leadership") == 1.3
        assert vocabulary.skill_weight("Intelligence Analysis") == 1.4
        assert vocabulary.skill_weight("Operations Management") == 1.2

    def test_related_skill_shares_weight(self):
        assert vocabulary.skill_weight("network security") == 1.5

    def test_default_weight(self):
        assert vocabulary.skill_weight("Basket Weaving") == vocabulary.DEFAULT_SKILL_WEIGHT

    def test_synonyms(self):
        assert "network security" in vocabulary.skill_synonyms("Cybersecurity")
        assert vocabulary.skill_synonyms("Welding") == ("welding",)


class TestCivilianEquivalent:
    def test_skills_only_from_user(self):
        civ = vocabulary.civilian_equivalent(["Cybersecurity"], "17S_AF")
        assert civ.skills == ("Cybersecurity",)
        assert "Cybersecurity Analyst" in civ.roles
        assert "Technology" in civ.industries

    def test_empty_skills(self):
        civ = vocabulary.civilian_equivalent([], None)
        assert civ.skills == ()
        assert civ.roles == ()

    def test_skill_renamed_to_civilian_phrasing(self):
        civ = vocabulary.civilian_equivalent(["Training & Development"])
        assert civ.skills == ("Training",)
        assert "Training Specialist" in civ.roles
