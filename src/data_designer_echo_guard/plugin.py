from data_designer.plugins.plugin import Plugin, PluginType

echo_guard_plugin = Plugin(
    config_qualified_name="data_designer_echo_guard.config.EchoGuardColumnConfig",
    impl_qualified_name="data_designer_echo_guard.generator.EchoGuardColumnGenerator",
    plugin_type=PluginType.COLUMN_GENERATOR,
)
