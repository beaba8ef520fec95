import pytest

from conformity.models import AutoScalingGroup, Cluster, Conformity, build_rule_config


class TestBuildRuleConfig:
    """Validation of required tags."""

    def test_trims_and_dedups(self):
        config = build_rule_config(" env", "env ", "owner", session=object())

        assert config.required_tags == frozenset({"env", "owner"})

    def test_accepts_list(self):
        config = build_rule_config(["env", "owner"], session=object())

        assert config.required_tags == frozenset({"env", "owner"})

    def test_none_argument_rejected(self):
        with pytest.raises(ValueError):
            build_rule_config(None, session=object())

    def test_none_element_rejected(self):
        with pytest.raises(ValueError):
            build_rule_config("env", None, session=object())

    def test_none_element_in_list_rejected(self):
        with pytest.raises(ValueError):
            build_rule_config(["env", None], session=object())

    def test_nested_list_rejected(self):
        with pytest.raises(ValueError):
            build_rule_config("env", ["owner"], session=object())

    def test_non_string_rejected(self):
        with pytest.raises(ValueError):
            build_rule_config("env", 42, session=object())

    def test_blank_tag_rejected(self):
        with pytest.raises(ValueError):
            build_rule_config("env", "  ", session=object())

    def test_no_tags_rejected(self):
        with pytest.raises(ValueError):
            build_rule_config(session=object())

    def test_explicit_session_kept(self):
        session = object()

        assert build_rule_config("env", session=session).session is session

    def test_default_session(self, mocker):
        fake_session = mocker.patch("conformity.models.boto3.Session")

        config = build_rule_config("env")

        fake_session.assert_called_once_with()
        assert config.session is fake_session.return_value

    def test_config_is_immutable(self):
        config = build_rule_config("env", session=object())

        with pytest.raises(AttributeError):
            config.required_tags = frozenset({"other"})


class TestCluster:
    """Cluster flattening and parsing."""

    def test_instance_ids_keep_order_and_duplicates(self):
        cluster = Cluster(
            name="app",
            region="us-east-1",
            auto_scaling_groups=(
                AutoScalingGroup("a", ("i-1", "i-2")),
                AutoScalingGroup("b", ("i-2", "i-3")),
            ),
        )

        assert cluster.instance_ids() == ["i-1", "i-2", "i-2", "i-3"]

    def test_from_dict(self):
        cluster = Cluster.from_dict({
            "name": "app",
            "region": "us-west-2",
            "autoScalingGroups": [
                {"name": "app-v001", "instances": ["i-1"], "suspendedProcesses": ["Launch"]},
                {"name": "app-v002", "instances": ["i-2"]},
            ],
        })

        assert cluster.region == "us-west-2"
        assert cluster.instance_ids() == ["i-1", "i-2"]
        assert cluster.auto_scaling_groups[0].suspended_processes == ("Launch",)

    def test_from_dict_default_region(self):
        cluster = Cluster.from_dict({"name": "app"}, default_region="eu-west-1")

        assert cluster.region == "eu-west-1"
        assert cluster.auto_scaling_groups == ()

    def test_from_dict_requires_region(self):
        with pytest.raises(ValueError):
            Cluster.from_dict({"name": "app"})


def test_conformity_to_dict():
    conformity = Conformity("InstanceHasTag", ("i-1", "i-2"))

    assert conformity.to_dict() == {"ruleId": "InstanceHasTag", "failedComponents": ["i-1", "i-2"]}
